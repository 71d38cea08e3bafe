"""Client and types for tool servers spoken to over JSON-RPC on stdio."""