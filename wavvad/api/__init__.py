# wavvad/api/__init__.py
# =======================
# VAD Service Client (wav-files-vad-api)
#
# Public API:
#   - VadApiClient : one POST per file to one endpoint
#   - VadApiError  : non-200 response or network failure

from wavvad.api.client import VadApiClient, VadApiError  # noqa: F401
