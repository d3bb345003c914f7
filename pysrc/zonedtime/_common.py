from ._math import MAX_EPOCH_DAYS, MIN_EPOCH_DAYS

Nanos = int  # 0-999_999_999
EpochSecs = int
Offset = int  # UTC offset in whole seconds

NS_PER_SEC = 1_000_000_000
NS_PER_DAY = 86_400 * NS_PER_SEC
SECS_PER_DAY = 86_400

# The range of UTC instants whose calendar date is representable
EPOCH_SECS_MIN: EpochSecs = MIN_EPOCH_DAYS * SECS_PER_DAY
EPOCH_SECS_MAX: EpochSecs = (MAX_EPOCH_DAYS + 1) * SECS_PER_DAY - 1

# Offsets are strictly less than a day in either direction
MAX_OFFSET_SECS = SECS_PER_DAY - 1
