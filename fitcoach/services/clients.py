"""
Client/trainer linking and subscription updates.

Every change is a single-field update on ``Client``; the last write wins and
no history is kept.
"""

import logging

from fitcoach.extensions import db
from fitcoach.models import Client, User
from fitcoach.models.client import SUBSCRIPTION_PLANS, SUBSCRIPTION_STATUSES
from fitcoach.services.visibility import SCOPE_MISS_MSG
from fitcoach.utils.errors import BadRequest, NotFound

logger = logging.getLogger(__name__)


def get_client_profile_or_404(client_id):
    client = Client.query.filter_by(user_id=client_id).first()
    if client is None:
        raise NotFound("Client profile not found")
    return client


def require_active_subscription(client, what="assigned workouts"):
    if not client.has_active_subscription:
        raise BadRequest(
            "Client does not have an active subscription. "
            f"Only clients with active subscriptions can be {what}."
        )


def assign_to_trainer(client_id, trainer):
    """A trainer takes an unassigned client with an active subscription."""
    client = Client.query.filter_by(user_id=client_id, trainer_id=None).first()
    if client is None:
        raise NotFound("Client not found or already assigned")
    require_active_subscription(client, "assigned to trainers")
    client.trainer_id = trainer.id
    db.session.commit()
    logger.info("Client %s assigned to trainer %s", client_id, trainer.id)
    return client


def unassign_from_trainer(client_id, user):
    query = Client.query.filter_by(user_id=client_id)
    if not user.is_admin:
        query = query.filter_by(trainer_id=user.id)
    client = query.first()
    if client is None or client.trainer_id is None:
        raise NotFound(SCOPE_MISS_MSG)
    previous = client.trainer_id
    client.trainer_id = None
    db.session.commit()
    logger.info("Client %s unassigned from trainer %s by user %s", client_id, previous, user.id)
    return client


def reassign_to_trainer(client_id, new_trainer_id):
    client = get_client_profile_or_404(client_id)
    trainer = User.query.filter_by(id=new_trainer_id, role="trainer").first()
    if trainer is None:
        raise NotFound("New trainer not found or is not a trainer")
    previous = client.trainer_id
    client.trainer_id = trainer.id
    db.session.commit()
    logger.info("Client %s reassigned from trainer %s to %s", client_id, previous, trainer.id)
    return client


def update_subscription(client_id, changes):
    """Apply the subscription fields present in ``changes``."""
    client = get_client_profile_or_404(client_id)
    status = changes.get("subscription_status")
    if status is not None and status not in SUBSCRIPTION_STATUSES:
        raise BadRequest(f"Invalid subscription status. Must be one of {', '.join(SUBSCRIPTION_STATUSES)}")
    plan = changes.get("subscription_plan")
    if plan is not None and plan not in SUBSCRIPTION_PLANS:
        raise BadRequest(f"Invalid subscription plan. Must be one of {', '.join(SUBSCRIPTION_PLANS)}")

    for key in ("subscription_status", "subscription_plan", "subscription_start", "subscription_end"):
        if key in changes:
            setattr(client, key, changes[key])
    db.session.commit()
    logger.info("Subscription of client %s updated: %s", client_id, sorted(changes))
    return client
