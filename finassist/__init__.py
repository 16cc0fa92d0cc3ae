"""Financial assistant core.

A conversational layer over a personal finance tracker: the model decides
whether it needs data, asks for one of the catalog functions, the client
dispatches it against local state and the result goes back for a final answer.
"""

__version__ = "0.3.0"
