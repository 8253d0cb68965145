from dotenv import load_dotenv
import os


load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./teams.db")
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

# Tokens are issued by the external identity provider, we only verify them
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
AUTH_TOKEN_URL = os.getenv("AUTH_TOKEN_URL", "/auth/v1/token")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]

AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"
ENABLE_SCHEDULER = os.getenv("ENABLE_SCHEDULER", "false").lower() == "true"
ORPHAN_SWEEP_MINUTES = int(os.getenv("ORPHAN_SWEEP_MINUTES", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# editor and member are the same tier
ROLE_HIERARCHY = {
    "owner": 4,
    "admin": 3,
    "editor": 2,
    "member": 2,
    "viewer": 1,
}

MANAGER_ROLES = ("owner", "admin")

# owner is only ever assigned when a team is created
INVITABLE_ROLES = ("admin", "editor", "member", "viewer")
