from .batch import SPBatch
from .errors import BatchMisuseError, BatchResponseError, CompositionError, HttpStatusError
from .queryable import SharePointQueryable, SharePointQueryableCollection, SharePointQueryableInstance
from .search import SearchSuggest, SuggestQuery
from .site_groups import SiteGroup, SiteGroups, WebGroups
from .site_users import SiteUser, SiteUsers
from .sp_client import SPClient
from .settings import Settings, client_from_settings
from .webs import Web, Webs

__all__ = [
    "SPBatch", "SPClient", "Settings", "client_from_settings",
    "SharePointQueryable", "SharePointQueryableCollection", "SharePointQueryableInstance",
    "Web", "Webs", "WebGroups", "SiteGroup", "SiteGroups", "SiteUser", "SiteUsers",
    "SearchSuggest", "SuggestQuery",
    "BatchMisuseError", "BatchResponseError", "CompositionError", "HttpStatusError",
]
