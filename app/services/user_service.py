from sqlalchemy.orm import Session
from app.data.models.user import UserModel
from app.repos.user_repo import UserRepo
from app.domain.schemas import UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_by_email(payload.email)
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(name=payload.name, email=payload.email, role=payload.role.value)
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise ValueError("User not found")
        return UserRead.model_validate(user)

    def list_users(self) -> list[UserRead]:
        return [UserRead.model_validate(u) for u in self.repo.list_users()]
