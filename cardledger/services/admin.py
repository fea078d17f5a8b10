"""
Admin authority shared in shape, not in state, by the registries.

Each registry constructs its own AdminAuthority from its bootstrap
principal. Handing off one registry's admin never affects another's.
"""

from cardledger.models.records import Principal


class AdminAuthority:
    """A single transferable admin principal."""

    __slots__ = ("_admin",)

    def __init__(self, admin: Principal) -> None:
        self._admin = admin

    @property
    def admin(self) -> Principal:
        return self._admin

    def is_admin(self, caller: Principal) -> bool:
        return caller == self._admin

    def transfer(self, caller: Principal, new_admin: Principal) -> bool:
        """
        Hand admin rights to new_admin.

        Returns False and leaves the admin unchanged unless caller is the
        current admin. Takes effect for the very next gated call.
        """
        if not self.is_admin(caller):
            return False
        self._admin = new_admin
        return True

    def __repr__(self) -> str:
        return f"AdminAuthority(admin={self._admin!r})"
