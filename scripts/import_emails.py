"""Script to bulk-import a list of emails through a running panel"""
import argparse
import requests
import time
from pathlib import Path

API_BASE_URL = "http://localhost:8000/api"


def read_emails(file_path: str):
    """One address per line; blank lines and # comments are ignored"""
    emails = []
    with open(file_path, 'r') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                emails.append(line)
    return emails


def submit_import(emails, account_id: str, delay_ms: int):
    """Submit the emails and return the new job id"""
    payload = {"emails": emails, "accountId": account_id, "delay": delay_ms}
    response = requests.post(f"{API_BASE_URL}/loops/import-contacts", json=payload)

    if response.status_code == 202:
        result = response.json()
        print(f"✓ Submitted {len(emails)} emails")
        print(f"  Job ID: {result['jobId']}")
        return result['jobId']

    print(f"✗ Error: {response.status_code}")
    print(response.text)
    return None


def check_job_status(job_id: str):
    """Check the status of an import job"""
    response = requests.get(f"{API_BASE_URL}/import-jobs/{job_id}")
    if response.status_code == 200:
        return response.json()
    return None


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("file", help="text file with one email per line")
    parser.add_argument("--account", required=True, help="account id from /api/accounts")
    parser.add_argument("--delay", type=int, default=500, help="milliseconds between emails")
    args = parser.parse_args()

    emails = read_emails(args.file)
    print("=" * 60)
    print(f"IMPORTING {len(emails)} EMAILS FROM {Path(args.file).name}")
    print("=" * 60)

    job_id = submit_import(emails, args.account, args.delay)
    if not job_id:
        return

    # Poll once a second while the job is moving
    seen_logs = 0
    while True:
        status = check_job_status(job_id)
        if not status:
            print(f"✗ Job {job_id} disappeared")
            return

        for entry in status['logs'][seen_logs:]:
            mark = "✓" if entry['status'] == 'success' else "✗"
            print(f"{mark} {entry['email']}: {entry['message']}")
        seen_logs = len(status['logs'])

        if status['status'] not in ['pending', 'running']:
            break
        time.sleep(1)

    failed = sum(1 for entry in status['logs'] if entry['status'] == 'failed')
    print("\n" + "=" * 60)
    print(f"Job {job_id} {status['status']}: {status['processedEmails']}/{status['totalEmails']} processed, {failed} failed")
    print("=" * 60)


if __name__ == "__main__":
    main()
