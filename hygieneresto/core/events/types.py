"""Names of the events exchanged on the client ``EventBus``."""


class EventTypes:
    # HTTP wrapper, on any 401/403 response. Payload: status, url
    SESSION_UNAUTHORIZED = "session.unauthorized"

    # Session controller. Payloads: user_id and role; reason (plus status, url
    # when the session was ended by the server)
    SESSION_LOGGED_IN = "session.logged_in"
    SESSION_LOGGED_OUT = "session.logged_out"
