"""Checker parameters (environment overrides where noted)"""
import os

CHECK_CONFIG = {
    "sentinel_status": "UNKNOWN",            # fork-choice status that ends a trial early
    "exempt_payload_id_on_unknown": True,    # skip payloadId comparison too on the sentinel
    "max_examples": int(os.environ.get("ENGINE_EQUIV_MAX_EXAMPLES", "300")),
    "corpus_dir": os.environ.get("ENGINE_EQUIV_CORPUS_DIR", "corpus"),
}
