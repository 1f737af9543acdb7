from flask import jsonify


def app_response(status_code: int = 200, message=None, data=None):
    """Wraps a payload in the {statusCode, message?, data?} envelope."""
    body = {"statusCode": status_code}
    if message is not None:
        body["message"] = str(message)
    if data is not None:
        body["data"] = data
    return jsonify(body), status_code
