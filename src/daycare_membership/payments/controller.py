from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import admin_required, current_user_id, login_required, require_owner_or_admin
from ..container import Container
from ..core.enums import PaymentStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .storage import validate_proof_upload


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payments", methods=["GET"], endpoint="payments_list")
    @admin_required
    def payments_list():
        status = request.args.get("status")
        try:
            status_filter = PaymentStatus(status) if status else None
        except ValueError:
            raise ValidationError(f"Unknown payment status {status!r}")
        payments = container.payment_service.list_payments(status=status_filter)
        return jsonify([p.to_dict() for p in payments])

    @app.route("/api/payments/member/<int:member_id>", methods=["GET"], endpoint="payments_for_member")
    @login_required
    def payments_for_member(member_id: int):
        require_owner_or_admin(member_id)
        payments = container.payment_service.list_member_payments(member_id)
        return jsonify([p.to_dict() for p in payments])

    @app.route("/api/payments", methods=["POST"], endpoint="payments_submit")
    @login_required
    def payments_submit():
        if session.get("role") != Role.MEMBER.value:
            raise AuthorizationError("Only members can create payment requests")

        amount = request.form.get("amount")
        hours_requested = request.form.get("hoursRequested")
        container.payment_service.check_amounts(amount, hours_requested)
        member = container.ledger.get_member(current_user_id())

        upload = request.files.get("paymentProof")
        filename = upload.filename if upload else ""
        data = upload.read() if upload else b""
        validate_proof_upload(filename, data, max_bytes=container.max_proof_bytes)
        proof_ref = container.proof_storage.save(filename, data)

        try:
            payment = container.payment_service.submit(
                member_id=member.member_id,
                amount=amount,
                hours_requested=hours_requested,
                proof_ref=proof_ref,
            )
        except Exception:
            container.proof_storage.delete(proof_ref)
            raise
        return jsonify(payment.to_dict()), 201

    @app.route("/api/payments/<int:request_id>/approve", methods=["PUT"], endpoint="payments_approve")
    @admin_required
    def payments_approve(request_id: int):
        result = container.payment_service.approve(request_id, current_user_id())
        return jsonify(result.to_dict())

    @app.route("/api/payments/<int:request_id>/reject", methods=["PUT"], endpoint="payments_reject")
    @admin_required
    def payments_reject(request_id: int):
        payment = container.payment_service.reject(request_id, current_user_id())
        return jsonify(payment.to_dict())
