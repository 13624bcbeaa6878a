"""
End-to-end scenarios against a running vault application.

Every scenario connects the mock wallet through the app's own UI and leaves
screenshots of each significant state behind.

Scenario Order:
    01 - Vaults page (whitelist gate, layout, deposit modal, search)
    02 - Vault basics through the page objects
    03 - Vault detail sections for the top APR vault
    04 - Comparison of the top three vaults
    05 - Create Vault form validation
    06 - Account positions page
"""
