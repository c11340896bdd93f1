from __future__ import annotations

from .operations import metadata, sp_post, then
from .queryable import SharePointQueryableCollection, SharePointQueryableInstance
from .sp_common import alias_token, escape_query_str_value

USER_PROPS = ("Title", "Email", "IsSiteAdmin", "LoginName", "PrincipalType")


class SiteUsers(SharePointQueryableCollection):
    DEFAULT_PATH = "siteusers"

    def get_by_id(self, user_id: int):
        return SiteUser(self, f"getById({int(user_id)})")

    def get_by_email(self, email: str):
        return SiteUser(self, f"getByEmail('{escape_query_str_value(email)}')")

    def get_by_login_name(self, login_name: str):
        # claims logins carry "|" and "#", so the value travels as @v
        return self.clone(SiteUser, f"getByLoginName({alias_token('@v', login_name)})")

    def add(self, login_name: str):
        body = metadata("SP.User")
        body["LoginName"] = login_name
        res = sp_post(self, body=body)
        return then(res, lambda d: self.get_by_login_name(login_name).in_batch(None))


class SiteUser(SharePointQueryableInstance):

    @property
    def groups(self):
        from .site_groups import SiteGroups
        return SiteGroups(self, "groups")

    def update(self, props):
        return self._update("SP.User", lambda d, p: {"data": d, "user": self}, allowed=USER_PROPS)(props)
