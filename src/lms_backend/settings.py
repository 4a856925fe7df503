import os
import threading

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        self.DATABASE_URL = os.environ.get("DATABASE_URL",None)
        # Identity provider settings
        self.AUTH_JWT_SECRET = os.environ.get("AUTH_JWT_SECRET","")
        self.AUTH_JWT_ALGORITHM = os.environ.get("AUTH_JWT_ALGORITHM","HS256")
        self.AUTH_JWT_AUDIENCE = os.environ.get("AUTH_JWT_AUDIENCE","authenticated")
        self.AUTH_WEBHOOK_SECRET = os.environ.get("AUTH_WEBHOOK_SECRET","")
        self.CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS","").split(",") if o.strip()]

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
