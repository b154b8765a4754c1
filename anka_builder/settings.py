import os
from dotenv import load_dotenv

_ = load_dotenv()

ANKA_BIN: str = os.environ.get("ANKA_BIN", "anka")

ANKA_REGISTRY_TIMEOUT_S: float = float(
    os.environ.get("ANKA_REGISTRY_TIMEOUT_S", "30")
)

ANKA_LOG_LEVEL: str = os.environ.get("ANKA_LOG_LEVEL", "INFO").upper()

DEFAULT_BOOT_DELAY: str = "10s"
DEFAULT_DISK_SIZE: str = "25G"
DEFAULT_RAM_SIZE: str = "2G"
DEFAULT_CPU_COUNT: str = "2"

# Prefixes used when a VM name has to be generated
BASE_VM_PREFIX: str = "anka-disk-base-"
BUILD_VM_PREFIX: str = "anka-packer-"
RANDOM_NAME_LENGTH: int = 10
