"""
Shared application context to resolve circular dependencies.
"""
from queue import Queue

# Event queue between the control server and the main loop
# Commands: "exit"
queue = Queue()
