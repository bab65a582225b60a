"""User administration: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from merchflow.domain import merchflow
from merchflow.exceptions import DuplicateUsername, NotFound, UnknownUser
from merchflow.identity.user import User
from merchflow.utils.logging import get_logger

logger = get_logger(__name__)


@merchflow.command(part_of="User")
class RegisterUser:
    username = String(required=True, max_length=50)
    role = String(required=True, max_length=20)
    email = String(max_length=254)
    full_name = String(max_length=150)


@merchflow.command(part_of="User")
class ChangeUserRole:
    user_id = Identifier(required=True)
    role = String(required=True, max_length=20)


@merchflow.command(part_of="User")
class RecordLogin:
    username = String(required=True, max_length=50)


@merchflow.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_username(command.username) is not None:
            raise DuplicateUsername(command.username)

        user = User.register(
            username=command.username,
            role=command.role,
            email=command.email,
            full_name=command.full_name,
        )
        repo.add(user)
        logger.info("User registered", username=command.username, role=command.role)
        return str(user.id)

    @handle(ChangeUserRole)
    def change_user_role(self, command):
        repo = current_domain.repository_for(User)
        try:
            user = repo.get(command.user_id)
        except ObjectNotFoundError:
            raise NotFound("User", command.user_id) from None

        user.change_role(command.role)
        repo.add(user)
        logger.info("User role changed", user_id=str(command.user_id), role=command.role)

    @handle(RecordLogin)
    def record_login(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_username(command.username)
        if user is None:
            raise UnknownUser(command.username)

        user.record_login()
        repo.add(user)
