from .get import Get
from .scan import Scan
from .mutation import Put
from .mutation import Delete
from .mutation import Mutation
from .time_range import TimeRange
