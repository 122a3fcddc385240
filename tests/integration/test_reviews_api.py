"""
Integration tests for the review lifecycle.
"""

import pytest

from models.review import Review


def _stored(db_session, review_id):
    db_session.expire_all()
    return db_session.query(Review).filter(Review.id == review_id).first()


class TestCreateReview:

    def test_create(self, client, book, user_headers, user, db_session):
        response = client.post(
            f"/books/{book.id}/reviews", headers=user_headers, json={"rating": 5, "review_text": "Loved it"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Review created successfully"
        stored = _stored(db_session, body["reviewId"])
        assert stored.user_id == user.id
        assert stored.review_text == "Loved it"

    def test_requires_token(self, client, book):
        response = client.post(f"/books/{book.id}/reviews", json={"rating": 5})

        assert response.status_code == 401
        assert response.json() == {"error": "Access token required"}

    @pytest.mark.parametrize("rating", [0, 6, -3, None])
    def test_rating_out_of_range(self, client, book, user_headers, db_session, rating):
        response = client.post(f"/books/{book.id}/reviews", headers=user_headers, json={"rating": rating})

        assert response.status_code == 400
        assert response.json() == {"error": "Rating must be between 1 and 5"}
        assert db_session.query(Review).count() == 0

    def test_non_integer_rating(self, client, book, user_headers, db_session):
        response = client.post(f"/books/{book.id}/reviews", headers=user_headers, json={"rating": 4.5})

        assert response.status_code == 400
        assert db_session.query(Review).count() == 0

    def test_unknown_book(self, client, user_headers):
        response = client.post("/books/999/reviews", headers=user_headers, json={"rating": 3})

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_second_review_rejected(self, client, book, review, user_headers, db_session):
        response = client.post(
            f"/books/{book.id}/reviews", headers=user_headers, json={"rating": 1, "review_text": "Again"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "You have already reviewed this book"}
        stored = _stored(db_session, review.id)
        assert stored.rating == 4
        assert stored.review_text == "Worth reading"
        assert db_session.query(Review).count() == 1

    def test_other_user_may_review_same_book(self, client, book, review, other_headers):
        response = client.post(f"/books/{book.id}/reviews", headers=other_headers, json={"rating": 2})
        assert response.status_code == 201

    def test_deleted_account_token(self, client, book, other_user, other_headers, admin_headers, db_session):
        assert client.delete(f"/users/{other_user.id}", headers=admin_headers).status_code == 200

        response = client.post(f"/books/{book.id}/reviews", headers=other_headers, json={"rating": 3})

        assert response.status_code == 401
        assert response.json() == {"error": "Account no longer exists"}
        assert db_session.query(Review).count() == 0


class TestUpdateReview:

    def test_owner_updates(self, client, review, user_headers, db_session):
        response = client.put(
            f"/reviews/{review.id}", headers=user_headers, json={"rating": 2, "review_text": "Meh"}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Review updated successfully"}
        stored = _stored(db_session, review.id)
        assert (stored.rating, stored.review_text) == (2, "Meh")

    def test_stranger_forbidden(self, client, review, other_headers, db_session):
        response = client.put(f"/reviews/{review.id}", headers=other_headers, json={"rating": 1})

        assert response.status_code == 403
        assert response.json() == {"error": "You can only edit your own reviews"}
        assert _stored(db_session, review.id).rating == 4

    def test_admin_overrides(self, client, review, admin_headers, db_session):
        response = client.put(f"/reviews/{review.id}", headers=admin_headers, json={"rating": 1})

        assert response.status_code == 200
        assert _stored(db_session, review.id).rating == 1

    def test_invalid_rating(self, client, review, user_headers, db_session):
        response = client.put(f"/reviews/{review.id}", headers=user_headers, json={"rating": 9})

        assert response.status_code == 400
        assert _stored(db_session, review.id).rating == 4

    def test_missing(self, client, user_headers):
        response = client.put("/reviews/77", headers=user_headers, json={"rating": 3})

        assert response.status_code == 404
        assert response.json() == {"error": "Review not found"}


class TestDeleteReview:

    def test_stranger_forbidden(self, client, review, other_headers, db_session):
        response = client.delete(f"/reviews/{review.id}", headers=other_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "You can only delete your own reviews"}
        assert _stored(db_session, review.id) is not None

    def test_owner_deletes(self, client, review, user_headers, db_session):
        response = client.delete(f"/reviews/{review.id}", headers=user_headers)

        assert response.status_code == 200
        assert _stored(db_session, review.id) is None

    def test_admin_deletes(self, client, review, admin_headers, db_session):
        response = client.delete(f"/reviews/{review.id}", headers=admin_headers)

        assert response.status_code == 200
        assert _stored(db_session, review.id) is None


class TestReviewCount:

    def test_admin_sees_count(self, client, review, admin_headers):
        response = client.get("/reviews/count", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"total_reviews": 1}

    def test_user_forbidden(self, client, user_headers):
        response = client.get("/reviews/count", headers=user_headers)
        assert response.status_code == 403

    def test_requires_token(self, client):
        assert client.get("/reviews/count").status_code == 401
