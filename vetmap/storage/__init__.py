from .key_value import KeyValueStorage, MemoryStorage, JsonFileStorage
from .redis_storage import RedisStorage

__all__ = ["KeyValueStorage", "MemoryStorage", "JsonFileStorage", "RedisStorage"]
