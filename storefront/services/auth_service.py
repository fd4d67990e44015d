# storefront/services/auth_service.py
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.schemas import UserRead
from storefront.repos.user_repo import UserRepo
from storefront.services.passwords import hash_password, verify_password
from storefront.services.token_service import TokenService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """
    Signup / login / profil.
    Signup i login zwracaja swiezy token - cookie ustawia router.
    """

    def __init__(self, db: Session, token_service: TokenService | None = None):
        self.repo = UserRepo(db)
        self.token_service = token_service or TokenService()

    def signup(self, email: str, password: str) -> str:
        if self.repo.get_by_email(email):
            raise ValueError("User already exists")

        user = UserModel(email=email, hashed_password=hash_password(password))

        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            # dwa rownolegle signupy na ten sam email, unique index wygral
            self.repo.rollback()
            raise ValueError("User already exists")

        logger.info(f"Utworzono uzytkownika {created.id}")

        return self.token_service.issue(created.id)

    def login(self, email: str, password: str) -> str:
        user = self.repo.get_by_email(email)

        # ten sam komunikat dla zlego emaila i zlego hasla
        if not user or not verify_password(password, user.hashed_password):
            raise PermissionError("Invalid credentials")

        logger.info(f"Uzytkownik {user.id} zalogowany")

        return self.token_service.issue(user.id)

    def get_user(self, user_id: uuid.UUID) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise ValueError("User not found")
        return UserRead(email=user.email)
