import os
from dotenv import load_dotenv

# load .env located at tripplanner/.env first, then fall back to the working directory
BASE_DIR = os.path.dirname(os.path.dirname(__file__))   # tripplanner/
DOTENV_PATH = os.path.join(BASE_DIR, ".env")
load_dotenv(dotenv_path=DOTENV_PATH)
load_dotenv()

# Database
MONGODB_URI = os.getenv('MONGODB_URI')
MONGODB_DB = os.getenv('MONGODB_DB')
ITINERARIES_COLLECTION = os.getenv('ITINERARIES_COLLECTION', 'itineraries')

# CORS
CORS_ORIGINS = os.getenv(
    'CORS_ORIGINS',
    "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
)

# Gemini
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')

# JWT
ENV = os.getenv('ENV', 'development').lower()
_DEFAULT_JWT_SECRET = 'dev-only-trip-planner-secret-8d1f6c0a9b4e4f27a3c5e2d7b6f18e90'
JWT_SECRET = os.getenv('JWT_SECRET')
if not JWT_SECRET:
    if ENV == 'development':
        JWT_SECRET = _DEFAULT_JWT_SECRET
        print("Warning: Using default JWT secret in development environment.")
    else:
        raise RuntimeError("JWT_SECRET environment variable must be set in production environment.")
JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', '60'))

# Saved trips
SAVED_TRIPS_LIMIT = int(os.getenv('SAVED_TRIPS_LIMIT', '50'))
