import os

from sqlalchemy import Engine
from sqlmodel import Session, create_engine, select

from contact_service.core import SENSITIVE_FIELDS
from contact_service.models.schema import Contact


def attack_contact(engine: Engine, contact_id: str, field: str = "firstName") -> bool:
    """Overwrite one encrypted field with random hex so reads hit DecryptionError."""
    if field not in SENSITIVE_FIELDS:
        print(f"[!] '{field}' is not an encrypted field")
        return False

    with Session(engine) as session:
        contact = session.exec(select(Contact).where(Contact.id == contact_id)).first()
        if not contact:
            print(f"[!] No contact with id '{contact_id}'")
            return False

        document = contact.to_document()
        garbage = f"{os.urandom(16).hex()}:{os.urandom(15).hex()}"

        parent, _, child = field.partition(".")
        if child:
            nested = dict(document.get(parent) or {})
            nested[child] = garbage
            contact.apply({parent: nested})
        else:
            contact.apply({parent: garbage})

        session.add(contact)
        session.commit()
        print(f"[✔] Tampered '{field}' for contact '{contact_id}'")
        return True


if __name__ == "__main__":
    import argparse

    from contact_service.shared import load_config
    from contact_service.shared.db import build_engine

    def parse_args():
        parser = argparse.ArgumentParser(description="Simulate ciphertext corruption")
        parser.add_argument("contact_id", type=str, help="Contact identifier")
        parser.add_argument(
            "--field", type=str, default="firstName", help="Encrypted field path"
        )
        parser.add_argument("--db", type=str, help="Database URL override")
        return parser.parse_args()

    args = parse_args()
    if args.db:
        engine = create_engine(args.db)
    else:
        engine = build_engine(load_config().database)

    attack_contact(engine, args.contact_id, args.field)
