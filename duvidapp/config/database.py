from datetime import datetime, timezone
from typing import Optional

import mongomock
import pymongo
from bson import ObjectId
from bson.errors import InvalidId

from duvidapp.config.settings import settings


def get_client():
    # Without a configured server the development backend runs on an in-process database
    if settings.mongo_url:
        return pymongo.MongoClient(settings.mongo_url)
    return mongomock.MongoClient()


client = get_client()
db = client[settings.database_name]


def reset_database():
    for name in db.list_collection_names():
        db.drop_collection(name)


# Stored timestamps are naive UTC, as MongoDB returns them
def now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
