import os
import sys
from pathlib import Path

# Keep tests deterministic and local-only.
os.environ["EXAMFLOW_SKIP_DOTENV"] = "1"
os.environ["EXAMFLOW_STORAGE_BACKEND"] = "local"
os.environ["EXAMFLOW_UPLOAD_DIR"] = str(Path(__file__).resolve().parent / ".test_uploads")
os.environ["EXAMFLOW_LLM_BACKEND"] = "mock"
os.environ["EXAMFLOW_LLM_API_KEY"] = "test-llm-key"
os.environ["EXAMFLOW_OCR_API_KEY"] = ""
os.environ["EXAMFLOW_EXTRACTION_MODE"] = "two_stage"

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
