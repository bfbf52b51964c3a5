# Overview: Service layer for the computer store back office.
