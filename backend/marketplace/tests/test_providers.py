def test_register_provider(client, new_user_id, auth_header):
	user = new_user_id()

	resp = client.post(
		"/api/providers/register",
		json={
			"businessName": "Bob's Tools & Co.",
			"description": "Power tools <b>cheap</b>",
			"address": "  42 Harbour Road ",
			"zipCode": "ab12 3cd",
			"phone": "+1 (555) 123-4567",
		},
		headers=auth_header(user),
	)
	assert resp.status_code == 200
	data = resp.get_json()["data"]
	assert data["user_id"] == user
	assert data["business_name"] == "Bob&#x27;s Tools &amp; Co."
	assert data["description"] == "Power tools &lt;b&gt;cheap&lt;&#x2F;b&gt;"
	assert data["address"] == "42 Harbour Road"
	assert data["zip_code"] == "AB12 3CD"

	me = client.get("/api/providers/me", headers=auth_header(user))
	assert me.status_code == 200
	assert me.get_json()["data"]["id"] == data["id"]


def test_register_provider_twice_is_rejected(client, new_user_id, auth_header, make_provider):
	user = new_user_id()
	make_provider(user)

	resp = client.post(
		"/api/providers/register",
		json={"businessName": "Second", "address": "1 Some Street", "zipCode": "12345"},
		headers=auth_header(user),
	)
	assert resp.status_code == 400
	assert resp.get_json()["error"] == "Service provider profile already exists for this user"


def test_register_provider_validation(client, new_user_id, auth_header):
	resp = client.post(
		"/api/providers/register",
		json={"businessName": "<script>", "address": "x", "zipCode": "1", "phone": "call me"},
		headers=auth_header(new_user_id()),
	)
	assert resp.status_code == 400
	errors = resp.get_json()["errors"]
	assert set(errors) >= {"businessName", "address", "zipCode", "phone"}


def test_my_provider_not_found(client, new_user_id, auth_header):
	resp = client.get("/api/providers/me", headers=auth_header(new_user_id()))
	assert resp.status_code == 404
