from duvidapp.client.RemoteClient import RemoteClient
from duvidapp.client.TokenStorage import FileTokenStorage, MemoryTokenStorage, TokenStorage
