from __future__ import annotations

from .operations import sp_post
from .queryable import SharePointQueryableCollection, SharePointQueryableInstance

WEB_PROPS = (
    "Title", "Description", "AlternateCssUrl", "SiteLogoUrl", "EnableMinimalDownload",
    "QuickLaunchEnabled", "TreeViewEnabled", "MasterUrl", "CustomMasterUrl",
)


class Web(SharePointQueryableInstance):
    DEFAULT_PATH = "_api/web"

    @property
    def webs(self):
        return Webs(self, "webs")

    def update(self, props):
        return self._update("SP.Web", lambda d, p: {"data": d, "web": self}, allowed=WEB_PROPS)(props)

    def break_role_inheritance(self, copy_role_assignments=False, clear_subscopes=False):
        path = (f"breakroleinheritance(copyroleassignments={str(bool(copy_role_assignments)).lower()}, "
                f"clearsubscopes={str(bool(clear_subscopes)).lower()})")
        return sp_post(self.clone(Web, path))


class Webs(SharePointQueryableCollection):
    DEFAULT_PATH = "webs"

    def get_by_id(self, web_id):
        return Web(self, f"getById('{web_id}')")
