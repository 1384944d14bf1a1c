import argparse
import sys

from fitcoach import create_app
from fitcoach.extensions import db
from fitcoach.models import User, Client
from fitcoach.models.client import SUBSCRIPTION_STATUSES
from fitcoach.models.user import ROLES


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create a FitCoach user.")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default=None)
    parser.add_argument("--role", choices=ROLES, default="admin")
    parser.add_argument("--subscription", choices=SUBSCRIPTION_STATUSES, default="INACTIVE",
                        help="subscription status for client users")
    parser.add_argument("--trainer-email", default=None, help="link a client user to this trainer")
    return parser.parse_args(argv)


def create_user(email, password, name=None, role="admin", subscription="INACTIVE", trainer_email=None):
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        print(f"User with email '{email}' already exists.")
        return None

    trainer = None
    if trainer_email:
        trainer = User.query.filter_by(email=trainer_email.strip().lower(), role="trainer").first()
        if trainer is None:
            print(f"Trainer '{trainer_email}' not found.")
            return None

    user = User(email=email, name=name or email.split("@")[0], role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.flush()

    if user.is_client:
        db.session.add(Client(
            user_id=user.id,
            trainer_id=trainer.id if trainer else None,
            subscription_status=subscription,
        ))
    db.session.commit()

    print(f"{role.capitalize()} created successfully!")
    print(f"Email: {email}")
    return user


if __name__ == "__main__":
    args = parse_args()
    app = create_app()
    with app.app_context():
        user = create_user(args.email, args.password, args.name, args.role, args.subscription, args.trainer_email)
    sys.exit(0 if user else 1)
