"""Nombres de colecciones Mongo compartidos por repos, bootstrap y scripts."""

PROFILE = "profile"
NOTIFICATION = "notification"
AUTH_USER = "auth_user"

CASE = "case"
CASE_EVIDENCE = "case_evidence"
# Colecciones que dependen de un caso y se borran junto con él
CASE_DEPENDENTS = ("case_evidence", "case_collaborator", "case_warrant", "case_message")

BUDGET_REQUEST = "budget_request"
VEHICLE_REQUEST = "vehicle_request"
ACTION_LOG = "action_log"
