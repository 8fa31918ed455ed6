import unittest

from filmhub.db import InMemoryDbClient, UserRecord
from filmhub.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidDomainError,
    MissingFieldError,
    MultipleResultsError,
)
from filmhub.users import (
    Registered,
    RegistrationRequest,
    Waitlisted,
    backfill_affiliation_flag,
    create_user,
    get_all_users,
    get_lmu_users,
    get_non_lmu_users,
    get_user_by_email,
    get_waitlist,
)


def _request(**overrides) -> RegistrationRequest:
    values = dict(
        email="ada@lmu.edu",
        first_name="Ada",
        last_name="Lovelace",
        username="ada",
        is_lmu=True,
    )
    values.update(overrides)
    return RegistrationRequest(**values)


class CreateUserTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def test_lmu_registration_creates_approved_user(self):
        outcome = create_user(self.db, _request(bio="Director"))
        self.assertIsInstance(outcome, Registered)
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.message, "Account created successfully")

        users = get_all_users(self.db)
        self.assertEqual(len(users), 1)
        self.assertEqual(users[0].id, outcome.user.id)
        self.assertTrue(users[0].is_approved)
        self.assertTrue(users[0].is_lmu)
        self.assertEqual(users[0].account_type, "filmmaker")
        self.assertEqual(users[0].bio, "Director")
        self.assertEqual(get_waitlist(self.db), [])

    def test_lion_subdomain_is_accepted(self):
        outcome = create_user(self.db, _request(email="ada@lion.lmu.edu"))
        self.assertIsInstance(outcome, Registered)

    def test_lmu_registration_rejects_other_domains(self):
        for email in ["ada@gmail.com", "ada@LMU.EDU", "ada@lmu.edu.evil.com"]:
            with self.subTest(email=email):
                with self.assertRaises(InvalidDomainError):
                    create_user(self.db, _request(email=email))
        self.assertEqual(get_all_users(self.db), [])
        self.assertEqual(get_waitlist(self.db), [])

    def test_non_lmu_registration_is_waitlisted(self):
        outcome = create_user(
            self.db,
            _request(email="sam@lmu.edu", is_lmu=False, affiliation="USC"),
        )
        self.assertIsInstance(outcome, Waitlisted)
        self.assertFalse(outcome.success)
        self.assertEqual(outcome.message, "Added to waitlist")

        self.assertEqual(get_all_users(self.db), [])
        waitlist = get_waitlist(self.db)
        self.assertEqual(len(waitlist), 1)
        self.assertEqual(waitlist[0].email, "sam@lmu.edu")
        self.assertEqual(waitlist[0].affiliation, "USC")
        self.assertFalse(waitlist[0].is_lmu)

    def test_repeated_waitlist_registration_adds_two_rows(self):
        create_user(self.db, _request(email="sam@gmail.com", is_lmu=False))
        create_user(self.db, _request(email="sam@gmail.com", is_lmu=False))
        self.assertEqual(len(get_waitlist(self.db)), 2)

    def test_duplicate_email_is_rejected(self):
        create_user(self.db, _request())
        with self.assertRaises(DuplicateEmailError):
            create_user(self.db, _request(username="someone-else"))
        self.assertEqual(len(get_all_users(self.db)), 1)

    def test_duplicate_email_is_checked_for_waitlist_path_too(self):
        create_user(self.db, _request())
        with self.assertRaises(DuplicateEmailError):
            create_user(self.db, _request(username="other", is_lmu=False))
        self.assertEqual(get_waitlist(self.db), [])

    def test_duplicate_username_is_rejected(self):
        create_user(self.db, _request())
        with self.assertRaises(DuplicateUsernameError):
            create_user(self.db, _request(email="grace@lmu.edu"))

    def test_missing_fields_are_rejected(self):
        with self.assertRaises(MissingFieldError) as ctx:
            create_user(self.db, _request(first_name="", username=""))
        self.assertEqual(ctx.exception.fields, ["first_name", "username"])
        self.assertEqual(get_all_users(self.db), [])


class UserQueryTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.lmu = UserRecord(
            email="a@lmu.edu", first_name="A", last_name="A", username="a", is_lmu=True
        )
        self.other = UserRecord(
            email="b@gmail.com", first_name="B", last_name="B", username="b", is_lmu=False
        )
        self.legacy = UserRecord(
            email="c@lion.lmu.edu", first_name="C", last_name="C", username="c"
        )
        for user in (self.lmu, self.other, self.legacy):
            self.db.insert_user(user)

    def test_get_user_by_email(self):
        self.assertEqual(get_user_by_email(self.db, "b@gmail.com").id, self.other.id)
        self.assertIsNone(get_user_by_email(self.db, "missing@lmu.edu"))

    def test_get_user_by_email_detects_duplicates(self):
        clone = UserRecord(
            email="a@lmu.edu", first_name="X", last_name="X", username="x"
        )
        # Bypass insert_user's uniqueness guard to simulate corrupted data.
        self.db.users[clone.id] = clone
        with self.assertRaises(MultipleResultsError):
            get_user_by_email(self.db, "a@lmu.edu")

    def test_affiliation_filters_skip_unset_flags(self):
        self.assertEqual([u.id for u in get_lmu_users(self.db)], [self.lmu.id])
        self.assertEqual([u.id for u in get_non_lmu_users(self.db)], [self.other.id])

    def test_get_all_users_keeps_insertion_order(self):
        self.assertEqual(
            [u.username for u in get_all_users(self.db)], ["a", "b", "c"]
        )

    def test_backfill_counts_every_scanned_user(self):
        self.db.insert_user(
            UserRecord(email="d@gmail.com", first_name="D", last_name="D", username="d")
        )
        scanned = backfill_affiliation_flag(self.db)
        self.assertEqual(scanned, 4)

        by_username = {u.username: u for u in get_all_users(self.db)}
        self.assertTrue(by_username["c"].is_lmu)
        self.assertFalse(by_username["d"].is_lmu)
        # Existing flags are untouched.
        self.assertTrue(by_username["a"].is_lmu)
        self.assertFalse(by_username["b"].is_lmu)
        self.assertEqual(len(get_lmu_users(self.db)), 2)
        self.assertEqual(len(get_non_lmu_users(self.db)), 2)


if __name__ == "__main__":
    unittest.main()
