from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, login_required, require_owner_or_admin
from ..container import Container
from .model import account_to_dict


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @admin_required
    def users_list():
        return jsonify([account_to_dict(a) for a in container.ledger.list_accounts()])

    @app.route("/api/users/profile", methods=["PUT"], endpoint="users_update_profile")
    @login_required
    def users_update_profile():
        data = request.get_json(silent=True) or {}
        account = container.ledger.update_own_profile(
            current_user_id(),
            name=data.get("name"),
            phone=data.get("phone"),
            address=data.get("address"),
        )
        return jsonify(account_to_dict(account))

    @app.route("/api/users/members", methods=["GET"], endpoint="members_list")
    @admin_required
    def members_list():
        return jsonify([account_to_dict(m) for m in container.ledger.list_members()])

    @app.route("/api/users/members", methods=["POST"], endpoint="members_create")
    @admin_required
    def members_create():
        data = request.get_json(silent=True) or {}
        member = container.ledger.create_member(
            name=data.get("name", ""),
            email=data.get("email", ""),
            rfid_number=data.get("rfidNumber", ""),
            membership_hours=data.get("membershipHours") or 0,
            is_active=data.get("isActive", True),
            phone=data.get("phone"),
            address=data.get("address"),
        )
        return jsonify({"msg": "Member created successfully", "member": account_to_dict(member)}), 201

    @app.route("/api/users/members/<int:member_id>", methods=["PUT"], endpoint="members_update")
    @admin_required
    def members_update(member_id: int):
        data = request.get_json(silent=True) or {}
        member = container.ledger.update_member(
            member_id,
            name=data.get("name"),
            email=data.get("email"),
            phone=data.get("phone"),
            address=data.get("address"),
            rfid_number=data.get("rfidNumber"),
            is_active=data.get("isActive"),
        )
        return jsonify(account_to_dict(member))

    @app.route("/api/users/members/<int:member_id>/hours", methods=["PUT"], endpoint="members_add_hours")
    @admin_required
    def members_add_hours(member_id: int):
        data = request.get_json(silent=True) or {}
        snapshot = container.ledger.grant_hours(member_id, data.get("hoursToAdd"))
        return jsonify(snapshot.to_dict())

    @app.route("/api/users/members/<int:member_id>/balance", methods=["GET"], endpoint="members_balance")
    @login_required
    def members_balance(member_id: int):
        require_owner_or_admin(member_id)
        return jsonify(container.ledger.balance(member_id).to_dict())
