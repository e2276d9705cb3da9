"""
Configuration Module
Upload limits, flow variant, endpoint URLs and Hugging Face model settings.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Upload Limits ---
MAX_UPLOAD_BYTES = 4 * 1024 * 1024  # 4 MiB, fixed ceiling
ACCEPTED_KINDS = ("image", "video")

# --- Flow Configuration ---
# multipart | huggingface | data-uri
FLOW_VARIANT = os.getenv("FLOW_VARIANT", "multipart").lower()
ANALYZE_ENDPOINT_URL = os.getenv(
    "ANALYZE_ENDPOINT_URL", "http://127.0.0.1:8000/.netlify/functions/analyze"
)

# --- HuggingFace Configuration ---
HF_API_URL = os.getenv("HF_API_URL", "https://api-inference.huggingface.co/models/")
HF_MODEL_ID = os.getenv("HF_MODEL_ID", "prithivMLmods/deepfake-detector-model-v1")
HF_TOKEN = os.getenv("HF_TOKEN", "")

_DEFAULT_HF_MODELS = ",".join([
    "prithivMLmods/deepfake-detector-model-v1",
    "umm-maybe/AI-image-detector",
    "Organika/sdxl-detector",
    "dima806/deepfake_vs_real_image_detection",
    "Wvolf/ViT_Deepfake_Detection",
    "haywoodsloan/ai-image-detector-deploy",
    "Nahrawy/AIorNot",
    "prithivMLmods/Deep-Fake-Detector-v2-Model",
])
HF_MODELS = [m.strip() for m in os.getenv("HF_MODELS", _DEFAULT_HF_MODELS).split(",") if m.strip()]

# --- HTTP Client ---
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "60"))  # seconds per request

# --- Video Analysis ---
VIDEO_MAX_FRAMES = int(os.getenv("VIDEO_MAX_FRAMES", "5"))
FRAME_JPEG_QUALITY = 85

# --- Server ---
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "info").lower()
