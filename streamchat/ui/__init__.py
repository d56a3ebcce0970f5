"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Session sidebar: new chat, select, delete
    - Message display with live in-progress reply
    - Send and stop controls

Contains no business logic. Delegates every action to the
ConversationOrchestrator.
"""
