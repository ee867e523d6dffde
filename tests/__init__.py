from pathlib import Path

TESTS_DIR = Path(__file__).parent
PROJECT_DIR = TESTS_DIR.parent
TESTDATA = TESTS_DIR / "testdata"
TESTDATA_PROFILES = TESTDATA / "profiles"

# Hand-assembled EVM programs used as contract artifacts.
#
# RECORDER runtime: SSTORE(4, 1); STOP
RECORDER_RUNTIME = "600160045500"
# RECORDER creation:
#   SSTORE(0, 0x2a)
#   SSTORE(1, BALANCE(ADDRESS))
#   SSTORE(3, CODESIZE)          init code plus appended constructor payload
#   CODECOPY(0, 0x1a, 6); RETURN(0, 6)
RECORDER_CREATION = (
    "602a600055"
    + "3031600155"
    + "38600355"
    + "6006601a600039"
    + "60066000f3"
    + RECORDER_RUNTIME
)

# Error("boom")
REVERT_DATA = (
    "08c379a0"
    + "00" * 31
    + "20"
    + "00" * 31
    + "04"
    + "626f6f6d"
    + "00" * 28
)
# CODECOPY(0, 0x0c, 100); REVERT(0, 100)
REVERTING_CREATION = "6064600c600039" + "60646000fd" + REVERT_DATA
# creation succeeds, returns REVERTING_CREATION as runtime so any call reverts
INIT_REVERTING_CREATION = "6070600c600039" + "60706000f3" + REVERTING_CREATION
# INVALID
REJECTING_CREATION = "fe"


def observer_creation(address_hex: str) -> str:
    """SSTORE(0, BALANCE(address)); STOP"""
    return "73" + address_hex.lower().replace("0x", "") + "31" + "600055" + "00"

# SSTORE(5, 0); SSTORE(6, 7); SSTORE(6, 7); SSTORE(7, 1); SSTORE(7, 0); STOP
UNCHANGED_WRITES_CREATION = (
    "6000600555" + "6007600655" + "6007600655" + "6001600755" + "6000600755" + "00"
)
