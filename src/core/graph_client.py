"""
MS Graph client setup with lazy initialization.

Reading calendars of other users needs the application permission
Calendars.Read (plus User.Read.All for calendar discovery).
"""

from azure.identity import ClientSecretCredential
from msgraph import GraphServiceClient

from core.config import GRAPH_APP_ID, GRAPH_CLIENT_SECRET, GRAPH_TENANT_ID, ConfigurationError

GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]

_graph_client: GraphServiceClient | None = None


def check_graph_credentials() -> None:
    """Raise ConfigurationError naming any missing Graph credential variables."""
    missing = [
        name
        for name, value in (
            ("MICROSOFT_GRAPH_TENANT_ID", GRAPH_TENANT_ID),
            ("MICROSOFT_GRAPH_APP_ID", GRAPH_APP_ID),
            ("MICROSOFT_GRAPH_CLIENT_SECRET", GRAPH_CLIENT_SECRET),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing Graph credentials. Set {', '.join(missing)} in .env.local or .env."
        )


def get_graph_client() -> GraphServiceClient:
    """Get or create the MS Graph client (lazy initialization)."""
    global _graph_client
    if _graph_client is None:
        check_graph_credentials()
        credential = ClientSecretCredential(
            tenant_id=GRAPH_TENANT_ID,
            client_id=GRAPH_APP_ID,
            client_secret=GRAPH_CLIENT_SECRET,
        )
        _graph_client = GraphServiceClient(credentials=credential, scopes=GRAPH_SCOPES)
    return _graph_client
