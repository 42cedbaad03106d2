from database.user_dao import UserDAO
from models.user import User
from utils.colors import pick_color


class UserService:
    def __init__(self, user_dao: UserDAO):
        self._dao = user_dao

    def get_all(self) -> list[User]:
        return self._dao.get_all()

    def create(self, name: str) -> User:
        name = name.strip()
        if not name:
            raise ValueError("User name cannot be empty.")
        users = self._dao.get_all()
        if any(u.name.lower() == name.lower() for u in users):
            raise ValueError(f"A user named '{name}' already exists.")
        return self._dao.create(name, pick_color([u.color for u in users]))

    def rename(self, user_id: int, name: str) -> User | None:
        name = name.strip()
        if not name:
            raise ValueError("User name cannot be empty.")
        if any(u.name.lower() == name.lower() and u.id != user_id for u in self._dao.get_all()):
            raise ValueError(f"A user named '{name}' already exists.")
        return self._dao.rename(user_id, name)

    def delete(self, user_id: int):
        """Removes the user's expenses, income and definitions with them."""
        self._dao.delete(user_id)
