"""Reconnect policy for the agent's link to a central server."""