"""Role-scoped access to assignment and progress records."""

import logging

from fitcoach.models import Client, User
from fitcoach.utils.errors import NotFound

logger = logging.getLogger(__name__)

SCOPE_MISS_MSG = "Client not found or not assigned to you"


def trainer_owns_client(trainer_id, client_id):
    return Client.query.filter_by(user_id=client_id, trainer_id=trainer_id).first() is not None


def ensure_client_in_scope(user, client_id):
    """
    Raise NotFound unless ``user`` may see data of the client ``client_id``.

    Out-of-scope ids get the same answer as unknown ids so the existence of
    another trainer's client is never confirmed.
    """
    if user.is_admin:
        return
    if user.is_trainer and trainer_owns_client(user.id, client_id):
        return
    if user.is_client and user.id == client_id:
        return
    logger.warning("User %s denied access to client %s", user.id, client_id)
    raise NotFound(SCOPE_MISS_MSG)


def scoped_assignments(model, user, client_id=None):
    """
    Query ``model`` (any table with a ``client_id`` column) limited to the
    rows ``user`` is entitled to see.

    * admin: every row
    * trainer: rows of clients currently linked through ``Client.trainer_id``
    * client: their own rows
    """
    if client_id is not None:
        ensure_client_in_scope(user, client_id)

    query = model.query
    if user.is_trainer:
        # Client.user_id is unique, so the join cannot duplicate rows
        query = query.join(Client, Client.user_id == model.client_id).filter(Client.trainer_id == user.id)
    elif user.is_client:
        query = query.filter(model.client_id == user.id)

    if client_id is not None:
        query = query.filter(model.client_id == client_id)
    return query


def get_scoped_or_404(model, record_id, user, msg="Assignment not found"):
    record = scoped_assignments(model, user).filter(model.id == record_id).first()
    if record is None:
        raise NotFound(msg)
    return record


def get_client_user_or_404(client_id):
    user = User.query.filter_by(id=client_id, role="client").first()
    if user is None:
        raise NotFound("User not found or is not a client")
    return user
