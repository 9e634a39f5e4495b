from scylla_cloud.infra.http import BearerAuth, HttpClient, HttpError

__all__ = ["BearerAuth", "HttpClient", "HttpError"]
