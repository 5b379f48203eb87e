from .CostTable import CostTable, PRE_EIP1884, POST_EIP1884, STIPEND
