"""Websocket topic broker with a tic-tac-toe example handler."""
