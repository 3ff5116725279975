"""Framework-free domain code: table store client, row forwarder, access gate,
staff session auth and schedule intake helpers."""
