# Root conftest.py - loads .env before test collection, so app.config sees it
from dotenv import load_dotenv
load_dotenv()
