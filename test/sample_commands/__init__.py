"""
Command modules discovered by the registry tests through Registry.include().
"""
