"""Chat feature package: session coordination, history, replies and storage.

A turn flows router -> controller -> SessionCoordinator, which resolves the
conversation, loads history through the HistoryAssembler, persists both sides
of the turn in the ConversationStore and asks the ReplyGenerator for the reply.
"""
