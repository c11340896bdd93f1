from __future__ import annotations

from .errors import CompositionError
from .operations import metadata, sp_post, then
from .queryable import SharePointQueryableCollection, SharePointQueryableInstance
from .site_users import SiteUsers
from .sp_common import alias_token, escape_query_str_value
from .webs import Web

GROUP_PROPS = (
    "Title", "Description", "AllowMembersEditMembership", "AllowRequestToJoinLeave",
    "AutoAcceptRequestToJoinLeave", "OnlyAllowMembersViewMembership", "RequestToJoinLeaveEmailSetting",
)


class SiteGroups(SharePointQueryableCollection):
    DEFAULT_PATH = "sitegroups"

    def get_by_id(self, group_id: int):
        return SiteGroup(self, f"getById({int(group_id)})")

    def get_by_name(self, name: str):
        return self.clone(SiteGroup, f"getByName({alias_token('@n', name)})")

    def add(self, props):
        props = dict(props)
        unknown = sorted(set(props) - set(GROUP_PROPS))
        if unknown:
            raise CompositionError(f"unknown properties for SP.Group: {', '.join(unknown)}")
        body = metadata("SP.Group")
        body.update(props)
        res = sp_post(self, body=body)
        return then(res, lambda d: {"data": d, "group": self.get_by_id(d["Id"]).in_batch(None)})

    def remove_by_id(self, group_id: int):
        return sp_post(self.clone(SiteGroups, f"removeById('{int(group_id)}')"))

    def remove_by_login_name(self, login_name: str):
        return sp_post(self.clone(SiteGroups, f"removeByLoginName({alias_token('@v', login_name)})"))


class SiteGroup(SharePointQueryableInstance):

    @property
    def users(self):
        return SiteUsers(self, "users")

    def update(self, props):
        def _mapped(d, p):
            group = self
            if "Title" in p:
                # renamed groups are addressed by their new name
                by_name = f"getByName({alias_token('@n', p['Title'])})"
                group = self.get_parent(SiteGroup, self.parent_url, by_name).in_batch(None)
            return {"data": d, "group": group}

        return self._update("SP.Group", _mapped, allowed=GROUP_PROPS)(props)


class WebGroups:
    """Group related capabilities of a Web."""

    def __init__(self, web: Web):
        self.web = web

    @property
    def site_groups(self) -> SiteGroups:
        return SiteGroups(self.web)

    @property
    def associated_owner_group(self) -> SiteGroup:
        return SiteGroup(self.web, "associatedownergroup")

    @property
    def associated_member_group(self) -> SiteGroup:
        return SiteGroup(self.web, "associatedmembergroup")

    @property
    def associated_visitor_group(self) -> SiteGroup:
        return SiteGroup(self.web, "associatedvisitorgroup")

    def create_default_associated_groups(self, group_name_seed, site_owner, copy_role_assignments=False,
                                         clear_subscopes=True, site_owner2=None):
        """
        Creates the Owners/Members/Visitors groups named after `group_name_seed`.
        The web loses inherited permissions first.
        """
        broken = self.web.break_role_inheritance(copy_role_assignments, clear_subscopes)

        q = self.web.clone(Web, "createDefaultAssociatedGroups(userLogin=@u,userLogin2=@v,groupNameSeed=@s)")
        q.query.set("@u", f"'{escape_query_str_value(site_owner or '')}'")
        q.query.set("@v", f"'{escape_query_str_value(site_owner2 or '')}'")
        q.query.set("@s", f"'{escape_query_str_value(group_name_seed or '')}'")
        # both requests are registered now so a batch keeps them in order
        created = sp_post(q)
        return then(broken, lambda _: created)
