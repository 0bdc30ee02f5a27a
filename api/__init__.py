"""
HTTP surface for the net-benefit engine
"""
