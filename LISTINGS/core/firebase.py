# file: LISTINGS/core/firebase.py

import json
import logging
import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore

from LISTINGS.core.config import CREDENTIAL_SOURCE, FIREBASE_PROJECT_ID

logger = logging.getLogger("core.firebase")

APP_NAME = "listings"


# ------------------------------
# Firestore (document store for listings)
# ------------------------------
def load_credentials(source: Optional[str] = CREDENTIAL_SOURCE):
    """
    Build Firebase credentials from GOOGLE_APPLICATION_CREDENTIALS, which may
    be either a path to a service account file or the raw JSON itself.
    """
    if not source:
        raise ValueError("GOOGLE_APPLICATION_CREDENTIALS env var is not set")

    # Case 1: it's a file path
    if os.path.exists(source):
        logger.info("Loading Firebase credentials from file: %s", source)
        return credentials.Certificate(source)

    # Case 2: it's a raw JSON string
    logger.info("Loading Firebase credentials from raw JSON string")
    return credentials.Certificate(json.loads(source))


def create_firestore_client(project_id: str = FIREBASE_PROJECT_ID):
    """Initialize (or reuse) the named Firebase app and return its Firestore client."""
    try:
        app = firebase_admin.get_app(APP_NAME)
    except ValueError:
        app = firebase_admin.initialize_app(
            load_credentials(), {"projectId": project_id}, name=APP_NAME
        )
        logger.info("Firebase initialized with project: %s", app.project_id)

    db = firestore.client(app)
    logger.info("Firestore client project: %s", db.project)
    return db


def close_firestore_client(db) -> None:
    db.close()
    try:
        firebase_admin.delete_app(firebase_admin.get_app(APP_NAME))
    except ValueError:
        # already deleted
        pass
