# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import time

from lahap.utils.schedulers.reset_token_cleaner import clean_stale_reset_tokens


logger = logging.getLogger("cleanup")

CLEANUP_TASKS = [
    ("PasswordResetTokens", clean_stale_reset_tokens),
]

def run_all_cleanups():
    logger.info("🧹 Starting all cleanup tasks...")

    failed = []
    for name, func in CLEANUP_TASKS:
        start = time.time()
        try:
            logger.info(f"🔹 Running cleanup: {name}")
            func()
            duration = round(time.time() - start, 2)
            logger.info(f"✅ Completed {name} cleanup in {duration} sec.")
        except Exception as e:
            logger.error(f"🛑 {name} cleanup failed: {e}", exc_info=True)
            failed.append(name)

    logger.info("🎉 All cleanup jobs completed.")
    return failed
