import logging
import subprocess
import sys
import time

import requests

from studyposts import config
from studyposts.logger import setup_logger
from studyposts.ui import play_shell

logger = logging.getLogger(__name__)


def start_backend(popen=subprocess.Popen):
    logger.info("Starting backend server...")
    # The server writes its own log file; its console output would garble the menu
    return popen(
        [sys.executable, "-m", "studyposts.server"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


def wait_for_backend(base_url, timeout, get=requests.get, sleep=time.sleep, clock=time.monotonic):
    """Poll the course list until the backend answers or the timeout passes."""
    deadline = clock() + timeout
    while True:
        try:
            if get(f"{base_url}/courses", timeout=1).ok:
                return True
        except requests.RequestException:
            pass
        if clock() >= deadline:
            return False
        sleep(0.2)


def stop_backend(process):
    if process.poll() is not None:
        logger.info("Server process exited with code %s", process.returncode)
        return
    logger.info("Stopping backend server...")
    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()


def main(popen=subprocess.Popen, shell=play_shell):
    # Keep the console for the menu; log details go to the file
    setup_logger(console_level=logging.ERROR)
    process = start_backend(popen)
    try:
        if not wait_for_backend(config.API_URL, config.STARTUP_TIMEOUT):
            logger.error("Backend did not answer at %s within %ss", config.API_URL, config.STARTUP_TIMEOUT)
            return 1
        return shell()
    except KeyboardInterrupt:
        return 0
    finally:
        stop_backend(process)


if __name__ == "__main__":
    sys.exit(main())
