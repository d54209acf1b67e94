import os
from dotenv import load_dotenv

load_dotenv()

API_ID = int(os.getenv("API_ID", "0"))
API_HASH = os.getenv("API_HASH", "")
BOT_TOKEN = os.getenv("BOT_TOKEN", "")

MONGO_URI = os.getenv("MONGO_URI", "")
MONGO_DB = os.getenv("MONGO_DB", "wordquiz")

WORDLIST_URL = os.getenv(
    "WORDLIST_URL",
    "https://gist.githubusercontent.com/dracos/dd0668f281e685bad51479e5acaadb93/raw/"
    "6bfa15d263d6d5b63840a8e5b64e04b382fdb079/valid-wordle-words.txt",
)
WORDLIST_PATH = os.getenv("WORDLIST_PATH", "")  # local file wins over the URL when set

DATE_TZ = os.getenv("DATE_TZ", "utc").lower()  # "utc" | "local"
TRANSLATE_LANGPAIR = os.getenv("TRANSLATE_LANGPAIR", "en|es")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "5"))

LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "data/completions.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
