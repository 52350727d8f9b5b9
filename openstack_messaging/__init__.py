"""
Bindings for the OpenStack messaging and orchestration APIs.
"""
