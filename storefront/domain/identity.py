# storefront/domain/identity.py
import uuid


class VerifiedIdentity:
    """
    Capability: "ten request dziala jako user X".

    Tworzy ja tylko SessionGate po weryfikacji tokenu. Handlery biora user_id
    wylacznie z tego obiektu, nigdy z naglowka ani z body.
    """

    __slots__ = ("_user_id",)

    def __init__(self, user_id: uuid.UUID):
        self._user_id = user_id

    @property
    def user_id(self) -> uuid.UUID:
        return self._user_id

    def __repr__(self):
        return f"VerifiedIdentity(user_id={self._user_id})"
