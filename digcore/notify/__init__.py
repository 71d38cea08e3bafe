"""Namespace for alert notifiers; it holds no modules yet."""