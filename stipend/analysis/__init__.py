from .Analysis   import Analysis
from .BasicBlock import BasicBlock
