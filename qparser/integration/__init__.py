""" Integrations with web frameworks """
