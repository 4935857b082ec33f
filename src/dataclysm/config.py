from dotenv import load_dotenv
import os

load_dotenv()

# Gemini credentials and model
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
GEMINI_MODEL = os.getenv("DATACLYSM_MODEL", "gemini-2.5-flash")
RESPONSE_MIME_TYPE = "application/json"

# Number of parsed rows shown to the analysis model
ANALYSIS_SAMPLE_ROWS = int(os.getenv("DATACLYSM_SAMPLE_ROWS", "50"))

VERBOSE = os.getenv("DATACLYSM_VERBOSE", "1").lower() not in ("0", "false", "no")

# Download name for cleaned exports; never derived from the uploaded file
EXPORT_FILENAME = "DATACLYSM_EXPORT.csv"
