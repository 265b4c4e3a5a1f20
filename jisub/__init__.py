"""
jisub: create Jira sub-tasks and update issue fields from the command line.
"""
__version__ = "0.1.0"
