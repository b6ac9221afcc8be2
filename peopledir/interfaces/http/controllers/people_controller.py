# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HTTP controller for the person directory."""

from __future__ import annotations

from dataclasses import replace

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from peopledir.domain import Person, Storage
from peopledir.interfaces.http.auth import RequestAuthenticator, requires_session
from peopledir.interfaces.http.dto.auth import OkDTO
from peopledir.interfaces.http.dto.people import PersonDTO, PersonPayloadDTO
from peopledir.shared.errors.validation import raise_validation_error
from peopledir.shared.logging import logger


def _dump(person: Person) -> dict:
    return PersonDTO.model_validate(person).model_dump(mode="json")


def _payload() -> PersonPayloadDTO:
    try:
        return PersonPayloadDTO.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class PeopleController:
    def __init__(self, *, storage: Storage, authenticator: RequestAuthenticator) -> None:
        self._storage = storage
        self._authenticator = authenticator

    @requires_session()
    def list_people(self) -> tuple[Response, int]:
        people = self._storage.list_people()
        return jsonify([_dump(person) for person in people]), 200

    @requires_session()
    def search_people(self) -> tuple[Response, int]:
        query = request.args.get("q", "")
        people = self._storage.fuzzy_find_people(query)
        logger.debug(f"people.search: q={query!r} hits={len(people)}")
        return jsonify([_dump(person) for person in people]), 200

    @requires_session()
    def get_person(self, person_id: int) -> tuple[Response, int]:
        return jsonify(_dump(self._storage.find_person(person_id))), 200

    @requires_session()
    def create_person(self) -> tuple[Response, int]:
        person = self._storage.insert_person(_payload().to_entity())
        logger.info(f"people.create: {person}")
        return jsonify(_dump(person)), 201

    @requires_session()
    def update_person(self, person_id: int) -> tuple[Response, int]:
        person = self._storage.update_person(replace(_payload().to_entity(), id=person_id))
        logger.info(f"people.update: {person} version={person.version}")
        return jsonify(_dump(person)), 200

    @requires_session()
    def delete_person(self, person_id: int) -> tuple[Response, int]:
        self._storage.delete_person(person_id)
        logger.info(f"people.delete: id={person_id}")
        return jsonify(OkDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("people", __name__, url_prefix="/api")
        bp.add_url_rule("/person", view_func=self.list_people, methods=["GET"])
        bp.add_url_rule("/person", view_func=self.create_person, methods=["POST"])
        bp.add_url_rule("/person/search", view_func=self.search_people, methods=["GET"])
        bp.add_url_rule("/person/<int:person_id>", view_func=self.get_person, methods=["GET"])
        bp.add_url_rule("/person/<int:person_id>", view_func=self.update_person, methods=["PUT"])
        bp.add_url_rule(
            "/person/<int:person_id>", view_func=self.delete_person, methods=["DELETE"]
        )
        return bp
